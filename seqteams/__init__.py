"""seqteams - forwards Seq log events to Microsoft Teams."""
__version__ = "0.1.0"
