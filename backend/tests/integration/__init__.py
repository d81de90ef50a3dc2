"""API integration tests"""
