"""Integration tests for the entry/exit lifecycle"""
