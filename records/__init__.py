# Records package - payload shapes and normalization
#
# Modules:
# - normalizer: resolves inbound payloads and builds persisted data
