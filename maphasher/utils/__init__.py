# Encoding helpers shared by the hasher surfaces
#
#  - compact: unsigned varints for the NodeID wire form
#  - serialization: hex/base64 digest encoding for the CLI and HTTP API
