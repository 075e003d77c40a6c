import pytest
from pymongo.errors import OperationFailure

from mongoable import ConfigurationError, Document, DocumentCatalog, SchemaSynthesizer
from mongoable.schema import get_collection_name

from .documents import Account, Auditable, Category, Person, PremiumAccount, Status, User


@pytest.fixture
def synthesizer(client) -> SchemaSynthesizer:
    return SchemaSynthesizer(client)


class TestCollectionName:

    def test_pluralized_class_name(self):
        assert get_collection_name(User) == "users"
        assert get_collection_name(Person) == "people"

    def test_explicit_name(self):
        assert get_collection_name(Account) == "customer_accounts"

    def test_abstract_class(self):
        with pytest.raises(ConfigurationError):
            get_collection_name(Auditable)


class TestBuildValidator:

    def test_name_and_age(self, synthesizer):
        validator = synthesizer.build_validator(User).to_dict()

        assert validator["bsonType"] == "object"
        assert validator["required"] == ["name"]
        assert validator["properties"]["name"] == {"bsonType": "string", "maxLength": 50}
        assert validator["properties"]["age"] == {"bsonType": "int", "minimum": 0, "maximum": 150}
        assert list(validator) == ["bsonType", "required", "properties"]

    def test_field_types(self, synthesizer):
        validator_document = synthesizer.build_validator(Account)
        properties = validator_document.to_dict()["properties"]

        assert properties["_id"] == {"bsonType": "string"}
        assert properties["email"] == {"bsonType": "string", "minLength": 3, "pattern": "@"}
        assert properties["status"] == {"enum": ["ACTIVE", "SUSPENDED"]}
        assert properties["tags"] == {"bsonType": "array", "items": {"bsonType": "string"}}
        assert properties["balance"] == {"bsonType": "double"}
        assert properties["visits"] == {"bsonType": "long"}
        assert properties["last_login"] == {"bsonType": ["date", "null"]}
        assert properties["owner_id"] == {"bsonType": ["objectId", "null"]}

    def test_embedded_object(self, synthesizer):
        properties = synthesizer.build_validator(Account).to_dict()["properties"]
        assert properties["address"] == {
            "bsonType": ["object", "null"],
            "required": ["street"],
            "properties": {
                "street": {"bsonType": "string"},
                "zip_code": {"bsonType": ["string", "null"], "pattern": "^[0-9]{5}$"},
            },
        }

    def test_unmapped_fields_are_skipped(self, synthesizer):
        validator_document = synthesizer.build_validator(Account)
        assert validator_document.skipped_fields == ["settings"]
        assert "settings" not in validator_document.to_dict()["properties"]

    def test_required_keeps_declaration_order(self, synthesizer):
        validator = synthesizer.build_validator(Person).to_dict()
        assert list(validator["properties"]) == ["_id", "created_by", "name"]
        assert validator["required"] == ["name"]

    def test_nullable_enum(self, synthesizer):
        class Ticket(Document):
            status: Status | None = None

        properties = synthesizer.build_validator(Ticket).to_dict()["properties"]
        assert properties["status"] == {"enum": ["ACTIVE", "SUSPENDED", None]}

    def test_self_referencing_class(self, synthesizer):
        validator = synthesizer.build_validator(Category).to_dict()
        assert validator["required"] == ["label"]
        assert validator["properties"]["children"] == {"bsonType": "array", "items": {"bsonType": "object"}}


class TestSynthesizeForType:

    @pytest.mark.asyncio
    async def test_creates_missing_collection(self, synthesizer, fake_db):
        result = await synthesizer.synthesize_for_type(User)

        assert result.created is True
        assert result.collection_name == "users"
        assert fake_db.collection_options["users"] == {
            "validator": result.validator,
            "validationAction": "error",
            "validationLevel": "strict",
        }
        assert fake_db.commands == []

    @pytest.mark.asyncio
    async def test_second_run_modifies_in_place(self, synthesizer, fake_db):
        await synthesizer.synthesize_for_type(User)
        result = await synthesizer.synthesize_for_type(User)

        assert result.created is False
        assert [call[1] for call in fake_db.calls].count("create_collection") == 1
        assert fake_db.commands == [{
            "collMod": "users",
            "validator": result.validator,
            "validationAction": "error",
            "validationLevel": "strict",
        }]

    @pytest.mark.asyncio
    async def test_registers_the_class(self, synthesizer, client):
        assert not client.registry.is_registered(Account)
        result = await synthesizer.synthesize_for_type(Account)

        assert client.registry.resolve(Account) == "customer_accounts"
        assert result.skipped_fields == ["settings"]
        assert result.registered is True

    @pytest.mark.asyncio
    async def test_store_errors_propagate_unchanged(self, synthesizer, client, fake_db):
        error = OperationFailure("not authorized", 13)

        async def command(_):
            raise error

        fake_db.existing.add("customer_accounts")
        fake_db.command = command

        with pytest.raises(OperationFailure) as exc_info:
            await synthesizer.synthesize_for_type(Account)
        assert exc_info.value is error
        assert not client.registry.is_registered(Account)

    @pytest.mark.asyncio
    async def test_class_registered_to_another_collection(self, synthesizer, client, fake_db, caplog):
        client.register_collection(Account, "accounts")
        with caplog.at_level("WARNING", logger="mongoable"):
            result = await synthesizer.synthesize_for_type(Account)

        assert result.registered is False
        assert result.collection_name == "customer_accounts"
        assert "Account is already registered to 'accounts'" in caplog.text
        assert client.registry.resolve(Account) == "accounts"


class TestSynthesizeForCatalog:

    @pytest.mark.asyncio
    async def test_skips_abstract_classes(self, synthesizer, catalog):
        results = await synthesizer.synthesize_for_catalog(catalog)
        assert [result.collection_name for result in results] == ["users", "customer_accounts", "people"]

    @pytest.mark.asyncio
    async def test_explicit_catalog(self, synthesizer, client):
        results = await synthesizer.synthesize_for_catalog(DocumentCatalog([Person]))
        assert [result.document_cls for result in results] == [Person]
        assert client.registry.resolve(Person) == "people"

    @pytest.mark.asyncio
    async def test_subclass_shares_the_collection_of_its_parent(self, synthesizer, client, fake_db):
        results = await synthesizer.synthesize_for_catalog(DocumentCatalog([Account, PremiumAccount]))

        assert [result.collection_name for result in results] == ["customer_accounts", "customer_accounts"]
        assert [result.created for result in results] == [True, False]
        assert [command["collMod"] for command in fake_db.commands] == ["customer_accounts"]
        assert "perks" in fake_db.commands[0]["validator"]["properties"]
        assert client.registry.resolve(Account) == "customer_accounts"
        assert client.registry.resolve(PremiumAccount) == "customer_accounts"
        assert client.registry.lookup_type("customer_accounts") is Account
