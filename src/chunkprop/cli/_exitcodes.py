"""Process exit codes used by the chunkprop CLI."""

SUCCESS = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2
STORE_ERROR = 3
NOT_FOUND = 4
SERIALIZATION_ERROR = 5
