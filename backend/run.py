from tripsplit import create_app
app = create_app()
if __name__ == "__main__":
    print("\n" + "="*50)
    print("STARTING TRIPSPLIT API ON ALL INTERFACES (0.0.0.0)")
    print("Routes are served under /api/v1")
    print("="*50 + "\n")
    app.run(host='0.0.0.0', port=5000, debug=True)
