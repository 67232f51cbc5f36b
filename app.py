"""
SUZURI Bridge
=============

Run with:
    python app.py

Visit:
    http://localhost:5000/api/items  - Item catalog
"""

from suzuri_bridge import create_app

app = create_app()


if __name__ == '__main__':
    port = app.config['PORT']
    print("\n" + "=" * 60)
    print("SUZURI Bridge")
    print("=" * 60)
    print(f"Create product:  POST http://localhost:{port}/api/create-product")
    print(f"Item catalog:    GET  http://localhost:{port}/api/items")
    print(f"My products:     GET  http://localhost:{port}/api/my-products")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=port, debug=True)
