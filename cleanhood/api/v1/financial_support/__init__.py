"""Financial Support API routes"""
