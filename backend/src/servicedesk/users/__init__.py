"""User profiles - owner resolution for orders"""
