"""fleetcache: TTL cache layer for the vehicle rental platform client."""
