"""Pure ACL services: codec, resolver and differ."""
