"""
permitted test suite.

- Subject key and policy store tests
- Grant and subject rule tests
- Ability tests
- Request boundary tests
- Exception tests
"""
