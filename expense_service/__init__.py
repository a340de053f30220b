"""Expense tracker HTTP backend."""
