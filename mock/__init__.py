"""Development backend and CLI"""
