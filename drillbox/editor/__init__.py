"""A doubly linked list and a chunked text document with formatting and undo/redo."""