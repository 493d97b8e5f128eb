"""HTTP handlers for the Keptn API: projects, stages, services, events, sequences, secrets and logs."""