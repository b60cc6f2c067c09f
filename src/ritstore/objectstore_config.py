"""Default configuration variables for ObjectStore"""

############### Store Path ###############
# Name of the reserved metadata directory created in a working tree
STORE_DIR_NAME = ".rit"
# Name of the properties file written to the store root
CONFIG_FILE_NAME = "objectstore.yaml"
# Name of the client log file written to the store root
CLIENT_LOG_FILE_NAME = "rit_client.log"

############### Directory Structure ###############
# Desired amount of directories when sharding an object to form the permanent address
DIR_DEPTH = 1  # WARNING: DO NOT CHANGE UNLESS SETTING UP NEW OBJECTSTORE
# Width of directories created when sharding an object to form the permanent address
DIR_WIDTH = 2  # WARNING: DO NOT CHANGE UNLESS SETTING UP NEW OBJECTSTORE
# Example:
# Below, objects are shown listed in directories that are 1 level deep (DIR_DEPTH=1),
# with each directory consisting of 2 characters (DIR_WIDTH=2).
#    .rit/objects
#    ├── b6
#    │   └── fc4c620b67d95f953a5c1c1230aaab5db5a1b0
#    └── 4b
#        └── 825dc642cb6eb9a060e54bf8d69288fbad4904

############### Compression ###############
# Compression applied to every object written, "zlib" or "none"
COMPRESSION = "zlib"  # WARNING: DO NOT CHANGE UNLESS SETTING UP NEW OBJECTSTORE
ACCEPTED_COMPRESSION = ["zlib", "none"]

############### References ###############
# Static default pointer written once at store creation
HEAD_REF = "ref: refs/heads/main\n"
