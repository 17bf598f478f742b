"""Settings and logging setup"""
