"""Support code shared by the rest of tmhighlight."""
