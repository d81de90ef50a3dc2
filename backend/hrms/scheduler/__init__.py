"""Background schedulers"""
