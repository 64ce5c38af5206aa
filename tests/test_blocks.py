def create_block(client, headers, page_id, text, **extra):
    return client.post(
        f"/blocks/pages/{page_id}/blocks",
        headers=headers,
        json={"type": "TEXT", "content": {"text": text}, **extra}
    )

# ========== TEST CREATE BLOCK ==========
def test_create_block_success(client, auth_headers, test_page):
    """Tester la création réussie d'un block"""
    response = create_block(client, auth_headers, test_page["id"], "Mon premier block")
    assert response.status_code == 201
    data = response.json()
    assert data["type"] == "TEXT"
    assert data["content"] == {"text": "Mon premier block"}
    assert data["position"] == 0
    assert data["page_id"] == test_page["id"]
    assert data["is_deleted"] is False

def test_create_block_appends(client, auth_headers, test_page):
    """Chaque nouveau block arrive en dernière position"""
    positions = [create_block(client, auth_headers, test_page["id"], f"B{i}").json()["position"] for i in range(3)]
    assert positions == [0, 1, 2]

def test_create_block_checklist(client, auth_headers, test_page):
    response = client.post(
        f"/blocks/pages/{test_page['id']}/blocks",
        headers=auth_headers,
        json={"type": "CHECKLIST", "content": {"items": [{"text": "Task 1", "checked": False}]}}
    )
    assert response.status_code == 201
    assert response.json()["content"]["items"][0]["checked"] is False

def test_create_block_invalid_type(client, auth_headers, test_page):
    response = client.post(
        f"/blocks/pages/{test_page['id']}/blocks",
        headers=auth_headers,
        json={"type": "VIDEO", "content": {"text": "x"}}
    )
    assert response.status_code == 422

def test_create_block_empty_content(client, auth_headers, test_page):
    response = client.post(
        f"/blocks/pages/{test_page['id']}/blocks",
        headers=auth_headers,
        json={"type": "TEXT", "content": {}}
    )
    assert response.status_code == 422

def test_create_block_position_out_of_range(client, auth_headers, test_page):
    response = create_block(client, auth_headers, test_page["id"], "x", position=3)
    assert response.status_code == 400

def test_create_block_other_user_page(client, other_headers, test_page):
    """La page d'un autre user est introuvable"""
    response = create_block(client, other_headers, test_page["id"], "intrus")
    assert response.status_code == 404

def test_create_block_missing_token(client, test_page):
    response = client.post(
        f"/blocks/pages/{test_page['id']}/blocks",
        json={"type": "TEXT", "content": {"text": "x"}}
    )
    assert response.status_code == 401

# ========== TEST LIST BLOCKS ==========
def test_list_blocks_empty(client, auth_headers, test_page):
    """Tester la liste vide des blocks"""
    response = client.get(f"/blocks/pages/{test_page['id']}/blocks", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == []

def test_list_blocks_ordered(client, auth_headers, test_page):
    """Tester que les blocks sont retournés ordonnés"""
    create_block(client, auth_headers, test_page["id"], "Block 0")
    create_block(client, auth_headers, test_page["id"], "Block 2")
    create_block(client, auth_headers, test_page["id"], "Block 1", position=1)

    response = client.get(f"/blocks/pages/{test_page['id']}/blocks", headers=auth_headers)
    data = response.json()
    assert [b["content"]["text"] for b in data] == ["Block 0", "Block 1", "Block 2"]
    assert [b["position"] for b in data] == [0, 1, 2]

def test_list_blocks_search(client, auth_headers, test_page):
    create_block(client, auth_headers, test_page["id"], "Acheter du pain")
    create_block(client, auth_headers, test_page["id"], "Appeler Paul")

    response = client.get(
        f"/blocks/pages/{test_page['id']}/blocks",
        headers=auth_headers,
        params={"search": "PAIN"}
    )
    data = response.json()
    assert len(data) == 1
    assert data[0]["content"]["text"] == "Acheter du pain"

# ========== TEST UPDATE BLOCK ==========
def test_update_block_success(client, auth_headers, test_page):
    """Tester la modification d'un block"""
    block_id = create_block(client, auth_headers, test_page["id"], "Original").json()["id"]

    response = client.patch(
        f"/blocks/{block_id}",
        headers=auth_headers,
        json={"content": {"text": "Contenu modifié", "level": 2}, "type": "HEADING"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["content"]["text"] == "Contenu modifié"
    assert data["type"] == "HEADING"
    assert data["position"] == 0

def test_update_block_forbidden(client, auth_headers, other_headers, test_page):
    block_id = create_block(client, auth_headers, test_page["id"], "Original").json()["id"]
    response = client.patch(f"/blocks/{block_id}", headers=other_headers, json={"content": {"text": "x"}})
    assert response.status_code == 403

def test_get_block_not_found(client, auth_headers):
    response = client.get("/blocks/9999", headers=auth_headers)
    assert response.status_code == 404

# ========== TEST DELETE / RESTORE / PURGE ==========
def test_delete_block_then_list(client, auth_headers, test_page):
    """Supprimer le block du milieu décale les suivants"""
    ids = [create_block(client, auth_headers, test_page["id"], f"B{i}").json()["id"] for i in range(4)]

    response = client.delete(f"/blocks/{ids[1]}", headers=auth_headers)
    assert response.status_code == 204

    data = client.get(f"/blocks/pages/{test_page['id']}/blocks", headers=auth_headers).json()
    assert [b["id"] for b in data] == [ids[0], ids[2], ids[3]]
    assert [b["position"] for b in data] == [0, 1, 2]

    trash = client.get(f"/blocks/pages/{test_page['id']}/trash", headers=auth_headers).json()
    assert [b["id"] for b in trash] == [ids[1]]
    assert trash[0]["deleted_at"] is not None

def test_delete_block_twice(client, auth_headers, test_page):
    block_id = create_block(client, auth_headers, test_page["id"], "x").json()["id"]
    client.delete(f"/blocks/{block_id}", headers=auth_headers)
    response = client.delete(f"/blocks/{block_id}", headers=auth_headers)
    assert response.status_code == 400

def test_delete_block_forbidden(client, auth_headers, other_headers, test_page):
    block_id = create_block(client, auth_headers, test_page["id"], "x").json()["id"]
    response = client.delete(f"/blocks/{block_id}", headers=other_headers)
    assert response.status_code == 403
    assert client.get(f"/blocks/{block_id}", headers=auth_headers).json()["is_deleted"] is False

def test_restore_block(client, auth_headers, test_page):
    """Restauration sans recalcul: la position d'avant suppression revient"""
    ids = [create_block(client, auth_headers, test_page["id"], f"B{i}").json()["id"] for i in range(3)]
    client.delete(f"/blocks/{ids[1]}", headers=auth_headers)

    response = client.post(f"/blocks/{ids[1]}/restore", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["is_deleted"] is False

    data = client.get(f"/blocks/pages/{test_page['id']}/blocks", headers=auth_headers).json()
    assert sorted(b["position"] for b in data) == [0, 1, 1]

def test_restore_active_block(client, auth_headers, test_page):
    block_id = create_block(client, auth_headers, test_page["id"], "x").json()["id"]
    response = client.post(f"/blocks/{block_id}/restore", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Block is not deleted"

def test_purge_block(client, auth_headers, test_page):
    block_id = create_block(client, auth_headers, test_page["id"], "x").json()["id"]

    response = client.delete(f"/blocks/{block_id}/permanent", headers=auth_headers)
    assert response.status_code == 400  # pas encore dans la corbeille

    client.delete(f"/blocks/{block_id}", headers=auth_headers)
    response = client.delete(f"/blocks/{block_id}/permanent", headers=auth_headers)
    assert response.status_code == 204
    assert client.get(f"/blocks/{block_id}", headers=auth_headers).status_code == 404

# ========== TEST REORDER BLOCKS ==========
def test_reorder_blocks(client, auth_headers, test_page):
    """Tester la réorganisation des blocks"""
    ids = [create_block(client, auth_headers, test_page["id"], f"B{i}").json()["id"] for i in range(3)]

    response = client.post(
        f"/blocks/pages/{test_page['id']}/reorder",
        headers=auth_headers,
        json={"block_ids": [ids[2], ids[0], ids[1]]}
    )
    assert response.status_code == 200
    data = response.json()
    assert [b["id"] for b in data] == [ids[2], ids[0], ids[1]]
    assert [b["position"] for b in data] == [0, 1, 2]

def test_reorder_blocks_empty(client, auth_headers, test_page):
    response = client.post(
        f"/blocks/pages/{test_page['id']}/reorder",
        headers=auth_headers,
        json={"block_ids": []}
    )
    assert response.status_code == 422

def test_reorder_blocks_forbidden(client, auth_headers, other_headers, test_page):
    ids = [create_block(client, auth_headers, test_page["id"], f"B{i}").json()["id"] for i in range(2)]
    response = client.post(
        f"/blocks/pages/{test_page['id']}/reorder",
        headers=other_headers,
        json={"block_ids": list(reversed(ids))}
    )
    assert response.status_code == 403
