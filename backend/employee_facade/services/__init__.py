"""Services Layer — facade operations composed from the upstream client and core helpers."""
