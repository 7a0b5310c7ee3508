class AppStatusCode:
    # Success
    DATA_RETRIEVED_SUCCESSFULLY = "100"
    OPERATION_SUCCESSFUL = "101"

    # Generic failures
    OPERATION_FAILED = "200"
    OPERATION_ERROR = "201"
    INVALID_INPUT = "202"
    REQUIRED_VALIDATION_ERROR = "203"
    DUPLICATE_ADD_ERROR = "204"
    NOT_FOUND_ERROR = "205"
    BUSINESS_RULE_VIOLATION = "206"
    CONCURRENCY_CONFLICT = "207"

    # Authentication
    AUTHENTICATION_TOKEN_INVALID = "300"
    AUTHENTICATION_TOKEN_EXPIRED = "301"
    AUTHENTICATION_UNAUTHORIZED_ACCESS = "302"
    AUTHENTICATION_USER_INVALID = "303"
    UNAUTHORIZED_ACTION = "304"
