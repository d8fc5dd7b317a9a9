"""Process exit codes shared by kvt commands."""

OK = 0
REFUSED = 1
USAGE_ERROR = 2
STORAGE_ERROR = 3
