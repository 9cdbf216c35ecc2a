"""ISA control panel service."""
