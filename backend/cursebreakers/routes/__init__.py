"""
Cursebreakers Backend - API Routes Package
===========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - health.py:   GET  /health
    - auth.py:     POST /auth/new, POST /auth/in, GET /auth/check
    - profile.py:  GET  /profile, GET|POST /profile/{username},
                   GET  /profile/{username}/posts
    - posts.py:    GET  /posts, GET /posts/{id_or_keyword},
                   POST /posts/new, /posts/edit/{id}, /posts/delete/{id},
                   POST /posts/{id}/comments

Routes are thin: extract the request, call a service, return its response
model. Business rules and error raising live in services.
"""
