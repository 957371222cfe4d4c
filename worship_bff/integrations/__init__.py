"""
Third-party service clients.

- http.py:        shared outbound httpx client (bounded timeout)
- captcha.py:     bot verification (Cloudflare Turnstile / Google reCAPTCHA)
- image_host.py:  managed image storage and transformation URLs
- wordpress.py:   WordPress / WordPress.com REST APIs
- image_pool.py:  cached pool of fallback featured images
"""
