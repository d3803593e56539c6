from donorapp import create_app

# Run the development server with `python -m donorapp`
if __name__ == '__main__':
    app = create_app()
    app.run(debug=True)
