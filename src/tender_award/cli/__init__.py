"""tender-award command-line interface"""
