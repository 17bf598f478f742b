"""FigureHub account security client"""
