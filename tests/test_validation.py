from gptchat.validation import DefaultJsonSchemaValidator


SCHEMA = {
	"type": "object",
	"properties": {"items": {"type": "array", "items": {"type": "integer"}}},
	"required": ["items"],
}


def test_valid_data():
	assert DefaultJsonSchemaValidator().validate({"items": [1, 2, 3]}, SCHEMA)


def test_invalid_data():
	validator = DefaultJsonSchemaValidator()

	assert not validator.validate({"items": ["a"]}, SCHEMA)
	assert not validator.validate({}, SCHEMA)


def test_broken_schema_is_reported_as_false():
	assert not DefaultJsonSchemaValidator().validate({"a": 1}, {"type": "no-such-type"})


def test_unresolvable_local_reference_is_reported_as_false():
	schema = {"type": "object", "properties": {"a": {"$ref": "#/$defs/Missing"}}}

	assert not DefaultJsonSchemaValidator().validate({"a": 1}, schema)


def test_unresolvable_remote_reference_is_reported_as_false():
	schema = {"$ref": "https://example.invalid/schema.json"}

	assert not DefaultJsonSchemaValidator().validate({"a": 1}, schema)
