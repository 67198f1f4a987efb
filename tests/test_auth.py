import uuid


def test_signup_success(client):
    """Test : créer un utilisateur avec succès"""
    unique_id = str(uuid.uuid4())[:8]
    response = client.post("/auth/signup", json={
        "email": f"signup_{unique_id}@example.com",
        "password": "password123"
    })
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == f"signup_{unique_id}@example.com"
    assert "id" in data
    assert "password_hash" not in data  # Le password ne doit pas être retourné

def test_signup_duplicate_email(client):
    """Test : impossible de créer 2 users avec le même email"""
    client.post("/auth/signup", json={"email": "dup@example.com", "password": "password123"})
    response = client.post("/auth/signup", json={"email": "dup@example.com", "password": "autre"})
    assert response.status_code == 400
    assert "Email déjà utilisé" in response.json()["detail"]

def test_signup_invalid_email(client):
    """Test : email mal formé refusé par la validation"""
    response = client.post("/auth/signup", json={"email": "pas-un-email", "password": "password123"})
    assert response.status_code == 422

def test_login_success(client):
    """Test : se connecter avec succès"""
    client.post("/auth/signup", json={"email": "login@example.com", "password": "password123"})
    response = client.post("/auth/login", json={"email": "login@example.com", "password": "password123"})
    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert "refresh_token" in data
    assert data["token_type"] == "bearer"

def test_login_wrong_password(client):
    """Test : impossible de se connecter avec un mauvais password"""
    client.post("/auth/signup", json={"email": "wrong@example.com", "password": "correctpassword"})
    response = client.post("/auth/login", json={"email": "wrong@example.com", "password": "wrongpassword"})
    assert response.status_code == 401
    assert "incorrect" in response.json()["detail"]

def test_login_unknown_email_same_message(client):
    """Test : email inconnu -> même message générique"""
    response = client.post("/auth/login", json={"email": "ghost@example.com", "password": "x"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Email ou mot de passe incorrect"

def test_refresh_gives_new_access_token(client):
    """Test : le refresh_token donne un access_token utilisable"""
    client.post("/auth/signup", json={"email": "refresh@example.com", "password": "pass123"})
    tokens = client.post("/auth/login", json={"email": "refresh@example.com", "password": "pass123"}).json()

    response = client.post(f"/auth/refresh?refresh_token={tokens['refresh_token']}")
    assert response.status_code == 200
    access_token = response.json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {access_token}"})
    assert me.status_code == 200

def test_refresh_rejects_access_token(client, auth_token):
    """Test : un access_token n'est pas un refresh_token"""
    response = client.post(f"/auth/refresh?refresh_token={auth_token}")
    assert response.status_code == 401

def test_me_returns_route(client, auth_headers):
    """Test : /auth/me donne l'uid et l'écran de départ"""
    response = client.get("/auth/me", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "test@example.com"
    assert data["route"] == "todos"
    assert data["uid"]

def test_me_without_token(client):
    """Test : pas de token -> 401"""
    response = client.get("/auth/me")
    assert response.status_code == 401

def test_me_with_refresh_token_rejected(client):
    """Test : un refresh_token ne permet pas d'appeler l'API"""
    client.post("/auth/signup", json={"email": "r@example.com", "password": "pass123"})
    tokens = client.post("/auth/login", json={"email": "r@example.com", "password": "pass123"}).json()
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})
    assert response.status_code == 401

def test_logout(client, auth_headers):
    response = client.post("/auth/logout", headers=auth_headers)
    assert response.status_code == 204

def test_health_z(client):
    """Test : l'endpoint health fonctionne"""
    response = client.get("/health/z")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
