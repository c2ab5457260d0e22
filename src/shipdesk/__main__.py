from shipdesk.app import main

main()
