"""Telegram bot that keeps a personal income and expense ledger."""
