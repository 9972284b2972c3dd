# Manager package - service layer between the API and storage
#
# Modules:
# - record_service: owner-scoped record create/list/update/delete
