# Middleware package init
"""
Post Service: Middleware Package
==================================

Middleware Chain (outermost first):
    Request → [CORS] → [Access] → [GZip] → Route Handler

    1. CORS first: OPTIONS is answered with 204 before anything else runs,
       and every other response gets the CORS headers on the way out
    2. Access: request ID for error bodies, one log line per request
       naming the post operation and post_id
"""
