"""Tomate - a Pomodoro timer for the command line."""
