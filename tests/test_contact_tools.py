"""
Tests for the contact operations.
"""


class TestSearchContacts:

    async def test_search_request(self, service, graph):
        await service.contact_tools.search_contacts("alice")

        url, kwargs = graph.get.last
        assert url == "/me/contacts"
        assert kwargs["params"]["$search"] == '"alice"'
        assert kwargs["params"]["$top"] == 10

    async def test_quotes_inside_search_term_are_escaped(self, service, graph):
        await service.contact_tools.search_contacts('O"Brien')

        assert graph.get.last[1]["params"]["$search"] == '"O\\"Brien"'

    async def test_email_addresses_are_flattened(self, service, graph):
        graph.respond_get(200, {"value": [{
            "id": "c1",
            "displayName": "Alice Example",
            "emailAddresses": [
                {"name": "Alice", "address": "alice@x.com"},
                {"name": "Alice (home)", "address": "alice@home.com"},
            ],
            "businessPhones": ["+1 555 0100"],
            "mobilePhone": None,
            "jobTitle": "Engineer",
            "companyName": "X",
        }]})

        result = await service.contact_tools.search_contacts("alice", top=3)

        assert result == {"success": True, "contacts": [{
            "id": "c1",
            "displayName": "Alice Example",
            "emailAddresses": ["alice@x.com", "alice@home.com"],
            "businessPhones": ["+1 555 0100"],
            "mobilePhone": None,
            "jobTitle": "Engineer",
            "companyName": "X",
        }]}


class TestCreateContact:

    async def test_email_and_phone_become_lists(self, service, graph):
        graph.respond_post(201, {
            "id": "c2",
            "displayName": "Bob",
            "emailAddresses": [{"address": "bob@x.com"}],
        })

        result = await service.contact_tools.create_contact("Bob", "bob@x.com", "+1 555 0101", "X", "CTO")

        contact = graph.post.last[1]["json"]
        assert contact == {
            "displayName": "Bob",
            "emailAddresses": [{"address": "bob@x.com"}],
            "businessPhones": ["+1 555 0101"],
            "companyName": "X",
            "jobTitle": "CTO",
        }
        assert result == {
            "success": True,
            "contact": {"id": "c2", "displayName": "Bob", "emailAddresses": ["bob@x.com"]},
        }

    async def test_missing_email_and_phone_become_empty_lists(self, service, graph):
        graph.respond_post(201, {"id": "c3", "displayName": "Carol"})

        result = await service.contact_tools.create_contact("Carol")

        contact = graph.post.last[1]["json"]
        assert contact["emailAddresses"] == []
        assert contact["businessPhones"] == []
        assert result["contact"]["emailAddresses"] == []

    async def test_403_is_flagged_as_auth_error(self, service, graph):
        graph.respond_post(403)

        result = await service.contact_tools.create_contact("Dave")

        assert result["success"] is False
        assert result["auth_required"] is True
