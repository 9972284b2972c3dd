# Tools package - clients for outside services
#
# Modules:
# - feed_api: NASA, weather and space news feeds
# - google_oauth: delegated Google login
