class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    TRIGGERS = V1 + "/triggers"
    CANCEL_TRIGGER = TRIGGERS + "/cancel"
    RESCHEDULE_TRIGGER = TRIGGERS + "/reschedule"
    READY_TRIGGERS = TRIGGERS + "/ready"
    POLLER_STATS = V1 + "/poller/stats"
