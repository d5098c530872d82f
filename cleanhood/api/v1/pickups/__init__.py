"""Pickups API routes"""
