"""Stacks and an infix expression calculator."""