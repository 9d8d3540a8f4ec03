"""PowerDash terminal application."""
