"""
Authentication bridge for the client app.

Design goals:
- The upstream auth API owns accounts and tokens; we only relay them.
- Cookie-based local session (HttpOnly) for the same-origin UI.
- Local logout always succeeds, whatever upstream does.
"""
