"""Update center artifact repository service."""
