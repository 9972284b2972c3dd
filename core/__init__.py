# Core package - foundational components
#
# Modules:
# - config: Application settings
# - errors: Error taxonomy mapped to HTTP statuses
# - identity: Caller identity from the login session
# - logging: Structured logging
# - storage: Pluggable record stores (MongoDB, in-memory)
