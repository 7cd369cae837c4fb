"""Client-side pieces of the cafe map viewer: backend client, map state and marker layer."""
