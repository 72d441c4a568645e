# Routes package init
"""
Post Service: API Routes Package
==================================

Route Inventory:
    - index.py:   GET    /api/                   (landing message)
    - posts.py:   GET    /api/posts              (list posts)
                  POST   /api/posts              (create post)
                  GET    /api/posts/{post_id}    (get post)
                  PATCH  /api/posts/{post_id}    (replace post)
                  DELETE /api/posts/{post_id}    (delete post)
    - health.py:  GET    /health                 (service health check)

Routes stay thin: extract path and body, call the service, return its result.
Status codes for failures come from the global exception handlers.
"""
