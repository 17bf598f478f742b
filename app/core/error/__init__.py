"""Error taxonomy and handling"""
