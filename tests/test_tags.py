def create_tag(client, headers, name):
    return client.post("/tags", headers=headers, json={"name": name})

# ========== TEST CREATE TAG ==========
def test_create_tag_normalized(client, auth_headers):
    """Le nom est stocké en minuscules, sans espaces autour"""
    response = create_tag(client, auth_headers, "  Work ")
    assert response.status_code == 201
    assert response.json()["name"] == "work"

def test_create_tag_duplicate(client, auth_headers):
    create_tag(client, auth_headers, "work")
    response = create_tag(client, auth_headers, "WORK")
    assert response.status_code == 409

def test_same_tag_name_for_two_users(client, auth_headers, other_headers):
    assert create_tag(client, auth_headers, "perso").status_code == 201
    assert create_tag(client, other_headers, "perso").status_code == 201

def test_create_tag_too_long(client, auth_headers):
    response = create_tag(client, auth_headers, "x" * 51)
    assert response.status_code == 422

# ========== TEST LIST / GET / DELETE ==========
def test_list_tags_with_page_count(client, auth_headers, test_page):
    work = create_tag(client, auth_headers, "work").json()
    create_tag(client, auth_headers, "alpha")
    client.post(f"/tags/pages/{test_page['id']}/tags/{work['id']}", headers=auth_headers)

    data = client.get("/tags", headers=auth_headers).json()
    assert [(t["name"], t["page_count"]) for t in data] == [("alpha", 0), ("work", 1)]

def test_get_tag_forbidden(client, auth_headers, other_headers):
    tag = create_tag(client, auth_headers, "secret").json()
    response = client.get(f"/tags/{tag['id']}", headers=other_headers)
    assert response.status_code == 403

def test_delete_tag_removes_associations(client, auth_headers, test_page):
    tag = create_tag(client, auth_headers, "temp").json()
    client.post(f"/tags/pages/{test_page['id']}/tags/{tag['id']}", headers=auth_headers)

    response = client.delete(f"/tags/{tag['id']}", headers=auth_headers)
    assert response.status_code == 204
    assert client.get(f"/tags/pages/{test_page['id']}", headers=auth_headers).json() == []
    assert client.get(f"/tags/{tag['id']}", headers=auth_headers).status_code == 404

# ========== TEST PAGE <-> TAG ==========
def test_add_tag_to_page(client, auth_headers, test_page):
    tag = create_tag(client, auth_headers, "work").json()

    response = client.post(f"/tags/pages/{test_page['id']}/tags/{tag['id']}", headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["tag"]["name"] == "work"

    page = client.get(f"/pages/{test_page['id']}", headers=auth_headers).json()
    assert [t["name"] for t in page["tags"]] == ["work"]

def test_add_tag_twice(client, auth_headers, test_page):
    tag = create_tag(client, auth_headers, "work").json()
    client.post(f"/tags/pages/{test_page['id']}/tags/{tag['id']}", headers=auth_headers)
    response = client.post(f"/tags/pages/{test_page['id']}/tags/{tag['id']}", headers=auth_headers)
    assert response.status_code == 409

def test_add_foreign_tag_to_page(client, auth_headers, other_headers, test_page):
    tag = create_tag(client, other_headers, "theirs").json()
    response = client.post(f"/tags/pages/{test_page['id']}/tags/{tag['id']}", headers=auth_headers)
    assert response.status_code == 403

def test_remove_tag_from_page(client, auth_headers, test_page):
    tag = create_tag(client, auth_headers, "work").json()
    client.post(f"/tags/pages/{test_page['id']}/tags/{tag['id']}", headers=auth_headers)

    response = client.delete(f"/tags/pages/{test_page['id']}/tags/{tag['id']}", headers=auth_headers)
    assert response.status_code == 204

    response = client.delete(f"/tags/pages/{test_page['id']}/tags/{tag['id']}", headers=auth_headers)
    assert response.status_code == 404

def test_filter_pages_by_tag(client, auth_headers):
    tagged = client.post("/pages", headers=auth_headers, json={"title": "tagged"}).json()
    client.post("/pages", headers=auth_headers, json={"title": "plain"})
    tag = create_tag(client, auth_headers, "work").json()
    client.post(f"/tags/pages/{tagged['id']}/tags/{tag['id']}", headers=auth_headers)

    data = client.get("/pages", headers=auth_headers, params={"tag_ids": [tag["id"]]}).json()
    assert [p["title"] for p in data] == ["tagged"]
