"""jsdocgen package.

This package generates JSDoc headers for TypeScript and JavaScript
declarations, including:
- Classification of syntax nodes into documentable declarations
- Header assembly with types, modifiers, parameters and custom tags
- Optional Claude-generated descriptions
- Insertion for one position, one file, one folder or a whole workspace
"""

__version__ = "1.0.0"
