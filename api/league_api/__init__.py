"""Rec-league management API: the live snake draft service."""
