"""BoxTrack: multi-tenant inventory of storage locations, containers and QR codes."""
