import uuid
from datetime import datetime, timedelta, timezone

from fastapi import status

from app.models.whatsapp import WhatsAppContact, WhatsAppMessage

INSTANCES_URL = "/whatsapp/instances"


def _create_instance(client, headers, **overrides):
    payload = {"instance_name": "Atendimento Loja", "phone_number": "5511987654321"}
    payload.update(overrides)
    resp = client.post(INSTANCES_URL, json=payload, headers=headers)
    assert resp.status_code == status.HTTP_201_CREATED, resp.text
    return resp.json()


def _create_contact(client, headers, instance_id, phone="5511911112222", name="Pedro"):
    resp = client.post(
        f"{INSTANCES_URL}/{instance_id}/contacts",
        json={"phone_number": phone, "name": name},
        headers=headers,
    )
    assert resp.status_code == status.HTTP_200_OK, resp.text
    return resp.json()


# =====================================================================
# Instâncias
# =====================================================================

def test_instance_lifecycle(client, client_user, client_headers):
    instance = _create_instance(client, client_headers)
    assert instance["user_id"] == str(client_user.id)
    assert instance["status"] == "disconnected"
    assert instance["is_ai_active"] is True

    listed = client.get(INSTANCES_URL, headers=client_headers).json()
    assert [item["id"] for item in listed] == [instance["id"]]

    connecting = client.put(
        f"{INSTANCES_URL}/{instance['id']}",
        json={"status": "connecting", "qr_code": "data:image/png;base64,AAA"},
        headers=client_headers,
    ).json()
    assert connecting["qr_code"] == "data:image/png;base64,AAA"
    assert connecting["last_connected_at"] is None

    connected = client.put(
        f"{INSTANCES_URL}/{instance['id']}",
        json={"status": "connected"},
        headers=client_headers,
    ).json()
    assert connected["status"] == "connected"
    assert connected["qr_code"] is None
    assert connected["last_connected_at"] is not None

    toggled = client.post(
        f"{INSTANCES_URL}/{instance['id']}/ai",
        json={"is_ai_active": False},
        headers=client_headers,
    ).json()
    assert toggled["is_ai_active"] is False

    resp = client.delete(f"{INSTANCES_URL}/{instance['id']}", headers=client_headers)
    assert resp.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"{INSTANCES_URL}/{instance['id']}", headers=client_headers).status_code == 404


def test_invalid_status_is_rejected(client, client_headers):
    instance = _create_instance(client, client_headers)

    resp = client.put(f"{INSTANCES_URL}/{instance['id']}", json={"status": "online"}, headers=client_headers)
    assert resp.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_explicit_null_for_required_fields_is_rejected(client, client_headers):
    instance = _create_instance(client, client_headers)
    url = f"{INSTANCES_URL}/{instance['id']}"

    for field in ("status", "instance_name", "is_ai_active"):
        resp = client.put(url, json={field: None}, headers=client_headers)
        assert resp.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY, field

    # campos opcionais continuam podendo ser limpos
    cleared = client.put(url, json={"phone_number": None, "qr_code": None}, headers=client_headers)
    assert cleared.status_code == status.HTTP_200_OK
    assert cleared.json()["phone_number"] is None
    assert cleared.json()["status"] == "disconnected"


def test_client_cannot_access_other_clients_instance(client, make_user, auth_headers, client_headers):
    other = make_user("outro@loja.com")
    other_headers = auth_headers(other)
    instance = _create_instance(client, other_headers)

    resp = client.get(f"{INSTANCES_URL}/{instance['id']}", headers=client_headers)
    assert resp.status_code == status.HTTP_403_FORBIDDEN
    assert resp.json()["detail"] == "Você não tem permissão para acessar esta instância."

    assert client.get(INSTANCES_URL, headers=client_headers).json() == []


def test_client_cannot_create_instance_for_someone_else(client, make_user, client_headers):
    other = make_user("outro@loja.com")

    resp = client.post(
        INSTANCES_URL,
        json={"instance_name": "Invasão", "user_id": str(other.id)},
        headers=client_headers,
    )
    assert resp.status_code == status.HTTP_403_FORBIDDEN


def test_admin_manages_instances_of_any_client(client, client_user, client_headers, admin_headers):
    created = _create_instance(client, admin_headers, user_id=str(client_user.id))
    assert created["user_id"] == str(client_user.id)

    _create_instance(client, client_headers, instance_name="Segunda linha")

    everything = client.get(INSTANCES_URL, headers=admin_headers).json()
    assert len(everything) == 2

    filtered = client.get(INSTANCES_URL, params={"status": "connected"}, headers=admin_headers).json()
    assert filtered == []

    assert client.get(f"{INSTANCES_URL}/{created['id']}", headers=admin_headers).status_code == 200


# =====================================================================
# Contatos e mensagens
# =====================================================================

def test_contact_upsert_by_phone(client, client_headers):
    instance = _create_instance(client, client_headers)

    first = _create_contact(client, client_headers, instance["id"], name="Pedro")
    second = _create_contact(client, client_headers, instance["id"], name="Pedro Alves")
    assert first["id"] == second["id"]
    assert second["name"] == "Pedro Alves"

    _create_contact(client, client_headers, instance["id"], phone="5511933334444", name="Lúcia")

    found = client.get(
        f"{INSTANCES_URL}/{instance['id']}/contacts",
        params={"search": "3333"},
        headers=client_headers,
    ).json()
    assert [contact["name"] for contact in found] == ["Lúcia"]


def test_incoming_messages_increment_unread(client, client_headers):
    instance = _create_instance(client, client_headers)
    contact = _create_contact(client, client_headers, instance["id"])
    messages_url = f"{INSTANCES_URL}/{instance['id']}/contacts/{contact['id']}/messages"

    incoming = client.post(messages_url, json={"content": "Oi, tudo bem?", "is_from_me": False}, headers=client_headers)
    assert incoming.status_code == status.HTTP_201_CREATED
    assert incoming.json()["status"] == "received"

    reply = client.post(
        messages_url,
        json={"content": "Olá! Como posso ajudar?", "is_ai_response": True},
        headers=client_headers,
    )
    assert reply.json()["status"] == "sent"
    assert reply.json()["is_from_me"] is True

    history = client.get(messages_url, headers=client_headers).json()
    assert [message["content"] for message in history] == ["Oi, tudo bem?", "Olá! Como posso ajudar?"]

    unread = client.get(
        f"{INSTANCES_URL}/{instance['id']}/contacts",
        params={"unread_only": True},
        headers=client_headers,
    ).json()
    assert unread[0]["unread_count"] == 1

    read = client.post(
        f"{INSTANCES_URL}/{instance['id']}/contacts/{contact['id']}/read",
        headers=client_headers,
    ).json()
    assert read["unread_count"] == 0


def test_message_requires_content_or_media(client, client_headers):
    instance = _create_instance(client, client_headers)
    contact = _create_contact(client, client_headers, instance["id"])

    resp = client.post(
        f"{INSTANCES_URL}/{instance['id']}/contacts/{contact['id']}/messages",
        json={},
        headers=client_headers,
    )
    assert resp.status_code == status.HTTP_400_BAD_REQUEST


def test_contact_from_other_instance_is_not_found(client, client_headers):
    first = _create_instance(client, client_headers)
    second = _create_instance(client, client_headers, instance_name="Outra")
    contact = _create_contact(client, client_headers, first["id"])

    resp = client.get(
        f"{INSTANCES_URL}/{second['id']}/contacts/{contact['id']}/messages",
        headers=client_headers,
    )
    assert resp.status_code == status.HTTP_404_NOT_FOUND
    assert resp.json()["detail"] == "Contato não encontrado"


def test_deleting_instance_removes_contacts_and_messages(client, db_session, client_headers):
    instance = _create_instance(client, client_headers)
    contact = _create_contact(client, client_headers, instance["id"])
    client.post(
        f"{INSTANCES_URL}/{instance['id']}/contacts/{contact['id']}/messages",
        json={"content": "Oi"},
        headers=client_headers,
    )

    client.delete(f"{INSTANCES_URL}/{instance['id']}", headers=client_headers)

    db_session.expire_all()
    assert db_session.query(WhatsAppContact).count() == 0
    assert db_session.query(WhatsAppMessage).count() == 0


def test_long_conversation_returns_latest_messages_in_order(client, db_session, client_headers):
    instance = _create_instance(client, client_headers)
    contact = _create_contact(client, client_headers, instance["id"])
    started = datetime(2026, 10, 1, 9, 0, tzinfo=timezone.utc)
    db_session.add_all(
        [
            WhatsAppMessage(
                instance_id=uuid.UUID(instance["id"]),
                contact_id=uuid.UUID(contact["id"]),
                content=f"m{index}",
                timestamp=started + timedelta(minutes=index),
            )
            for index in range(150)
        ]
    )
    db_session.commit()
    url = f"{INSTANCES_URL}/{instance['id']}/contacts/{contact['id']}/messages"

    default_page = [item["content"] for item in client.get(url, headers=client_headers).json()]
    assert len(default_page) == 100
    assert default_page[0] == "m50"
    assert default_page[-1] == "m149"

    short_page = client.get(url, params={"limit": 3}, headers=client_headers).json()
    assert [item["content"] for item in short_page] == ["m147", "m148", "m149"]
