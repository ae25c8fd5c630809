"""Exam prep quiz service."""
