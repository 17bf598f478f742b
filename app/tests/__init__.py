"""Account client tests"""
