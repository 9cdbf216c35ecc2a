"""ISA assistant (isa-chat) service."""
