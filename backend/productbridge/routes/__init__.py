"""
ProductBridge Backend — API Routes Package
============================================

Route Inventory:
    - products.py: GET    {base}/products
                   GET    {base}/products/{id}
                   POST   {base}/products
                   PUT    {base}/products/{id}
                   DELETE {base}/products/{id}
    - health.py:   GET    /health

{base} is settings.base_path (default /api), applied in main.create_app().

Routes stay thin: they pull the path id, body and fail flag out of the
request and delegate to ProductService.
"""
