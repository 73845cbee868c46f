class PERM:
    class PROMPT:
        SUBMIT = "prompt:submit"
        READ = "prompt:read"
        WRITE = "prompt:write"
        ADMIN = "prompt:admin"

    class MODEL:
        READ = "model:read"
        WRITE = "model:write"
        ADMIN = "model:admin"

    class ANIMATION:
        READ = "animation:read"
        GENERATE = "animation:generate"


USER_SCOPES = (PERM.PROMPT.SUBMIT,)

ADMIN_SCOPES = USER_SCOPES + (
    PERM.PROMPT.READ,
    PERM.PROMPT.WRITE,
    PERM.PROMPT.ADMIN,
    PERM.MODEL.READ,
    PERM.MODEL.WRITE,
    PERM.MODEL.ADMIN,
    PERM.ANIMATION.READ,
    PERM.ANIMATION.GENERATE,
)
