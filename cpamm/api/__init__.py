"""HTTP service exposing the swap facade."""
