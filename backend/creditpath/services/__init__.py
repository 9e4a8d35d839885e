"""CreditPath - Services"""
