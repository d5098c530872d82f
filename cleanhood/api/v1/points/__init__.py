"""Points API routes"""
