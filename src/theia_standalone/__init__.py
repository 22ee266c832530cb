"""Package a Theia application against a temporary Verdaccio registry."""
