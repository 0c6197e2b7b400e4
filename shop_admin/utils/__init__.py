"""Formatting, keyboards and form validation"""
